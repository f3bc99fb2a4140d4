# foodie_api/api/engagement/routes.py
import logging

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from marshmallow import ValidationError

from foodie_api.api.engagement.schemas import CommentCreateSchema
from foodie_api.api.posts.schemas import CommentResponseSchema
from foodie_api.core.exceptions import InvalidRequestError, NotFoundError

engagement_bp = Blueprint('engagement_bp', __name__)


@engagement_bp.route('/toggle-like/<string:post_id>', methods=['POST'])
@jwt_required()
def toggle_like(post_id: str):
    engagement_service = current_app.services['engagement']
    user_id = get_jwt_identity()
    try:
        liked = engagement_service.toggle_like(user_id, post_id)
        return jsonify({
            "message": f"Post {'liked' if liked else 'disliked'} successfully",
            "postId": post_id,
            "liked": liked
        }), 200
    except NotFoundError as e:
        return jsonify(e.to_dict()), 404
    except Exception as e:
        logging.error(f"Like toggle failed (post_id: {post_id}, uid: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "LIKE_TOGGLE_FAILED", "message": "Error toggling like"}), 500


@engagement_bp.route('/post-likes/<string:post_id>', methods=['GET'])
def get_post_likes(post_id: str):
    """First names of everyone who liked the post."""
    engagement_service = current_app.services['engagement']
    try:
        return jsonify({"likes": engagement_service.get_like_names(post_id)}), 200
    except NotFoundError as e:
        return jsonify({"error_code": "POST_NOT_FOUND", "message": e.message}), 404


@engagement_bp.route('/toggle-bookmark/<string:post_id>', methods=['POST'])
@jwt_required()
def toggle_bookmark(post_id: str):
    engagement_service = current_app.services['engagement']
    user_id = get_jwt_identity()
    try:
        bookmarked = engagement_service.toggle_bookmark(user_id, post_id)
        return jsonify({
            "message": f"Post {'bookmarked' if bookmarked else 'unbookmarked'} successfully",
            "postId": post_id,
            "isBookmarked": bookmarked
        }), 200
    except NotFoundError as e:
        return jsonify(e.to_dict()), 404


@engagement_bp.route('/add-comment', methods=['POST'])
@jwt_required()
def add_comment():
    """Append a comment to ``postId``. Any signed-in user may comment on any post."""
    engagement_service = current_app.services['engagement']
    user_id = get_jwt_identity()
    try:
        data = CommentCreateSchema().load(request.get_json(silent=True) or {})
        comment = engagement_service.add_comment(user_id, data['post_id'], data['body'])
        return jsonify({
            "message": "Comment added successfully",
            "comment": CommentResponseSchema().dump(comment)
        }), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except InvalidRequestError as e:
        return jsonify(e.to_dict()), 400
    except NotFoundError as e:
        return jsonify(e.to_dict()), 404
