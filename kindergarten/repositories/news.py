from kindergarten.models import News
from kindergarten.repositories.base import BaseRepository


class NewsRepository(BaseRepository):
    model = News
    entity_name = 'news'

    def find_all(self):
        return self._run('fetching', lambda: self.query().order_by(News.created_at.desc()).all())
