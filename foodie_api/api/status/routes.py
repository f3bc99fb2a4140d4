# foodie_api/api/status/routes.py
from flask import Blueprint, jsonify

status_bp = Blueprint('status_bp', __name__)

TEAM = [
    "Gal Rabinovich",
    "Lina Petrovsky",
    "Ilya Karazhya",
    "Sergei Yakima",
    "Mohamed Alfker",
    "David Aronov",
]


@status_bp.route('/about', methods=['GET'])
def about():
    return jsonify({"Team": TEAM}), 200


@status_bp.route('/ping', methods=['GET'])
def ping():
    return jsonify("Pong:Team 4"), 200
