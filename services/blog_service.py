from flask import current_app
from sqlalchemy import update
from extensions import db
from models.blog_model import BlogPost, BLOG_STATUSES, DRAFT, PUBLISHED
from utils.errors import NotFoundError, ValidationError, json_object
from utils.pagination import parse_pagination, paginate
from utils.permissions import Permission, require_permission

UPDATABLE_FIELDS = ('title', 'content', 'excerpt', 'category', 'tags', 'image', 'status')
TEXT_FIELDS = ('title', 'content', 'excerpt', 'category', 'image')


def _get_post(post_id):
    post = db.session.get(BlogPost, post_id)
    if not post:
        raise NotFoundError("Blog post not found")
    return post


def _validate_tags(tags):
    if tags is None:
        return []
    if not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags):
        raise ValidationError("tags must be a list of strings", fields=['tags'])
    return [tag.strip() for tag in tags if tag.strip()]


def _validate_text(values):
    invalid = [name for name in TEXT_FIELDS if values.get(name) is not None and not isinstance(values[name], str)]
    if invalid:
        raise ValidationError("Text fields must be strings", fields=invalid)


def _validate_status(status):
    if status not in BLOG_STATUSES:
        raise ValidationError(f"Invalid status. Choose one of: {', '.join(BLOG_STATUSES)}", fields=['status'])
    return status


class BlogService:
    @staticmethod
    def list_posts(args):
        page, limit = parse_pagination(args, default_limit=10)

        query = BlogPost.query
        if args.get('status'):
            query = query.filter_by(status=args.get('status'))
        if args.get('category'):
            query = query.filter_by(category=args.get('category'))
        query = query.order_by(BlogPost.created_at.desc(), BlogPost.id.desc())

        posts, pagination = paginate(query, page, limit)
        return {'posts': [post.to_dict() for post in posts], 'pagination': pagination}, 200

    @staticmethod
    def get_post(post_id):
        post = _get_post(post_id)
        # Views leave updated_at untouched.
        db.session.execute(
            update(BlogPost)
            .where(BlogPost.id == post.id)
            .values(views=BlogPost.views + 1, updated_at=BlogPost.updated_at)
        )
        db.session.commit()
        db.session.refresh(post)
        return post.to_dict(), 200

    @staticmethod
    def create_post(current_user, data):
        require_permission(current_user, Permission.BLOG_CREATE)
        if not isinstance(data, dict):
            raise ValidationError("Invalid JSON body")

        missing = [name for name in ('title', 'content') if not data.get(name)]
        if missing:
            raise ValidationError("Missing required fields", fields=missing)
        _validate_text(data)

        status = _validate_status(data.get('status') or DRAFT)
        if status == PUBLISHED:
            require_permission(current_user, Permission.BLOG_PUBLISH)

        post = BlogPost(
            title=data['title'],
            content=data['content'],
            excerpt=data.get('excerpt'),
            author=current_user.username,
            author_id=current_user.id,
            category=data.get('category'),
            tags=_validate_tags(data.get('tags')),
            image=data.get('image'),
            status=status,
            views=0,
        )
        db.session.add(post)
        db.session.commit()
        current_app.logger.info(f"Blog post {post.id} created by user {current_user.id}")

        return {'message': 'Blog post created successfully', 'post': post.to_dict()}, 201

    @staticmethod
    def update_post(current_user, post_id, data):
        require_permission(current_user, Permission.BLOG_EDIT)
        data = json_object(data)
        post = _get_post(post_id)

        updates = {field: data[field] for field in UPDATABLE_FIELDS if field in data}
        _validate_text(updates)
        if 'tags' in updates:
            updates['tags'] = _validate_tags(updates['tags'])
        if 'status' in updates:
            _validate_status(updates['status'])
            if updates['status'] == PUBLISHED and post.status != PUBLISHED:
                require_permission(current_user, Permission.BLOG_PUBLISH)
        for field in ('title', 'content'):
            if field in updates and not updates[field]:
                raise ValidationError(f"{field} cannot be empty", fields=[field])

        for field, value in updates.items():
            setattr(post, field, value)
        db.session.commit()

        return {'message': 'Blog post updated successfully', 'post': post.to_dict()}, 200

    @staticmethod
    def delete_post(current_user, post_id):
        require_permission(current_user, Permission.BLOG_DELETE)
        post = _get_post(post_id)
        db.session.delete(post)
        db.session.commit()
        current_app.logger.info(f"Blog post {post_id} deleted by user {current_user.id}")
        return {'message': 'Blog post deleted successfully'}, 200

    @staticmethod
    def get_categories():
        rows = (
            db.session.query(BlogPost.category)
            .filter(BlogPost.category.isnot(None))
            .distinct()
            .order_by(BlogPost.category)
            .all()
        )
        return [category for (category,) in rows], 200

    @staticmethod
    def get_tags():
        tags = set()
        for (post_tags,) in db.session.query(BlogPost.tags).all():
            tags.update(post_tags or [])
        return sorted(tags), 200
