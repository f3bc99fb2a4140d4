# foodie_api/api/posts/routes.py
import logging

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from marshmallow import ValidationError

from foodie_api.api.posts.schemas import PostCreateSchema, PostResponseSchema, PostUpdateSchema
from foodie_api.core.exceptions import ForbiddenError, InvalidRequestError, NotFoundError

posts_bp = Blueprint('posts_bp', __name__)


@posts_bp.route('/create-post', methods=['POST'])
@jwt_required()
def create_post():
    post_service = current_app.services['posts']
    user_id = get_jwt_identity()
    try:
        data = PostCreateSchema().load(request.get_json(silent=True) or {})
        new_post = post_service.create_post(user_id, data['title'], data['body'], data['author'])
        return jsonify({
            "message": "Post created successfully",
            "post": PostResponseSchema().dump(new_post)
        }), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except InvalidRequestError as e:
        return jsonify(e.to_dict()), 400
    except NotFoundError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": e.message}), 404
    except Exception as e:
        logging.error(f"Post creation failed (uid: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "POST_CREATION_FAILED", "message": "Error creating post"}), 500


@posts_bp.route('/posts', methods=['GET'])
def get_posts():
    """
    Newest posts, five per page. ``lastVisible`` (timestamp) and ``lastVisibleId`` are the
    cursor returned by the previous page; ``lastVisible`` alone continues with strictly older posts.
    """
    post_service = current_app.services['posts']
    cursor = request.args.get('lastVisible', None, type=str)
    cursor_id = request.args.get('lastVisibleId', None, type=str)
    try:
        posts, next_cursor, next_cursor_id = post_service.get_posts(cursor, cursor_id)
        return jsonify({
            "posts": PostResponseSchema(many=True).dump(posts),
            "lastVisible": next_cursor,
            "lastVisibleId": next_cursor_id
        }), 200
    except InvalidRequestError as e:
        return jsonify(e.to_dict()), 400


@posts_bp.route('/posts/<string:post_id>', methods=['GET'])
def get_post(post_id: str):
    post_service = current_app.services['posts']
    try:
        post = post_service.get_post_by_id(post_id)
        return jsonify(PostResponseSchema().dump(post)), 200
    except NotFoundError as e:
        return jsonify({"error_code": "POST_NOT_FOUND", "message": e.message}), 404


@posts_bp.route('/edit-post/<string:post_id>', methods=['PUT'])
@jwt_required()
def update_post(post_id: str):
    """
    Change title/body. Owner, admin, sharer or reposter only.
    Editing an original rewrites its shares too.
    """
    post_service = current_app.services['posts']
    user_id = get_jwt_identity()
    try:
        data = PostUpdateSchema().load(request.get_json(silent=True) or {})
        updated_post = post_service.update_post(user_id, post_id, data['title'], data['body'])
        return jsonify({
            "message": "Post updated successfully",
            "updatedPost": PostResponseSchema().dump(updated_post)
        }), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except InvalidRequestError as e:
        return jsonify(e.to_dict()), 400
    except ForbiddenError as e:
        return jsonify(e.to_dict()), 403
    except NotFoundError as e:
        return jsonify(e.to_dict()), 404


@posts_bp.route('/share-post/<string:post_id>', methods=['POST'])
@jwt_required()
def share_post(post_id: str):
    post_service = current_app.services['posts']
    user_id = get_jwt_identity()
    try:
        shared_post_id = post_service.share_post(user_id, post_id)
        return jsonify({"message": "Post shared successfully", "sharedPostId": shared_post_id}), 200
    except NotFoundError as e:
        return jsonify(e.to_dict()), 404
    except Exception as e:
        logging.error(f"Sharing failed (post_id: {post_id}): {e}", exc_info=True)
        return jsonify({"error_code": "SHARE_FAILED", "message": "Error sharing post"}), 500


@posts_bp.route('/repost/<string:post_id>', methods=['POST'])
@jwt_required()
def repost_post(post_id: str):
    post_service = current_app.services['posts']
    user_id = get_jwt_identity()
    try:
        data = PostUpdateSchema().load(request.get_json(silent=True) or {})
        repost_id = post_service.repost_post(user_id, post_id, data['title'], data['body'])
        return jsonify({"message": "Post reposted successfully", "repostId": repost_id}), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except InvalidRequestError as e:
        return jsonify(e.to_dict()), 400
    except NotFoundError as e:
        return jsonify(e.to_dict()), 404
    except Exception as e:
        logging.error(f"Repost failed (post_id: {post_id}): {e}", exc_info=True)
        return jsonify({"error_code": "REPOST_FAILED", "message": "Error reposting post"}), 500


@posts_bp.route('/delete-post/<string:post_id>', methods=['DELETE'])
@jwt_required()
def delete_post(post_id: str):
    """Delete a post with its shares/reposts. Deleting a missing post succeeds."""
    post_service = current_app.services['posts']
    user_id = get_jwt_identity()
    try:
        post_service.delete_post(user_id, post_id)
        return jsonify({"message": "Post deleted successfully"}), 200
    except ForbiddenError as e:
        return jsonify(e.to_dict()), 403
    except NotFoundError as e:
        return jsonify(e.to_dict()), 404
    except Exception as e:
        logging.error(f"Post deletion failed (post_id: {post_id}): {e}", exc_info=True)
        return jsonify({"error_code": "POST_DELETION_FAILED", "message": str(e)}), 500
