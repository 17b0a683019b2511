from extensions import db
from utils.time_utils import utc_now, isoformat

DRAFT = 'draft'
PUBLISHED = 'published'
ARCHIVED = 'archived'
BLOG_STATUSES = (DRAFT, PUBLISHED, ARCHIVED)


class BlogPost(db.Model):
    __tablename__ = 'blog_posts'
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    content = db.Column(db.Text, nullable=False)
    excerpt = db.Column(db.Text, nullable=True)
    author = db.Column(db.String(150), nullable=False)
    author_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    category = db.Column(db.String(100), nullable=True, index=True)
    tags = db.Column(db.JSON, nullable=False, default=list)
    image = db.Column(db.String(300), nullable=True)
    status = db.Column(db.String(20), nullable=False, default=DRAFT, index=True)
    views = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=utc_now, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=utc_now, onupdate=utc_now)

    author_user = db.relationship('User', foreign_keys=[author_id])

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'content': self.content,
            'excerpt': self.excerpt,
            'author': self.author,
            'authorId': self.author_user.to_reference() if self.author_user else None,
            'category': self.category,
            'tags': list(self.tags or []),
            'image': self.image,
            'status': self.status,
            'views': self.views,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }
