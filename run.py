# run.py
import os

from dotenv import load_dotenv

basedir = os.path.abspath(os.path.dirname(__file__))
# .env next to this file takes effect before the app reads its config
load_dotenv(dotenv_path=os.path.join(basedir, '.env'))

from foodie_api import create_app  # noqa: E402

app = create_app()

if __name__ == '__main__':
    host = os.getenv('FLASK_RUN_HOST', '127.0.0.1')
    port = int(os.getenv('FLASK_RUN_PORT', 5000))
    debug = app.config.get('DEBUG', False)
    app.run(host=host, port=port, debug=debug)
