from kindergarten import db
from kindergarten.utils.helpers import new_id, utc_now, isoformat

class News(db.Model):
    __tablename__ = 'news'
    
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    title = db.Column(db.String(200), nullable=False)
    content = db.Column(db.Text, nullable=False)
    author = db.Column(db.String(100))
    image_url = db.Column(db.String(500))
    subtitles = db.Column(db.JSON, default=list)
    created_at = db.Column(db.DateTime, default=utc_now)
    updated_at = db.Column(db.DateTime, default=utc_now, onupdate=utc_now)
    
    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'content': self.content,
            'author': self.author,
            'imageUrl': self.image_url,
            'subtitles': list(self.subtitles or []),
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }
    
    def __repr__(self):
        return f'<News {self.title}>'
