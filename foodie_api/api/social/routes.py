# foodie_api/api/social/routes.py
from flask import Blueprint, current_app, jsonify
from flask_jwt_extended import get_jwt_identity, jwt_required

from foodie_api.core.exceptions import InvalidRequestError, NotFoundError

social_bp = Blueprint('social_bp', __name__)


@social_bp.route('/toggle-follow/<string:user_id>', methods=['POST'])
@jwt_required()
def toggle_follow(user_id: str):
    social_service = current_app.services['social']
    current_user_id = get_jwt_identity()
    try:
        following = social_service.toggle_follow(current_user_id, user_id)
        return jsonify({
            "message": f"User {'followed' if following else 'unfollowed'} successfully",
            "following": following
        }), 200
    except InvalidRequestError as e:
        return jsonify(e.to_dict()), 400
    except NotFoundError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": e.message}), 404
