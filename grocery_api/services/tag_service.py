from sqlalchemy.orm import Session
from typing import List
from grocery_api.database import transaction
from grocery_api.models.tag import Tag
from grocery_api.repositories.tag_repository import TagRepository
from grocery_api.core.exception import ResourceNotFoundException


class TagService:
    def __init__(self, db: Session):
        self.db = db
        self.tag_repo = TagRepository(db)

    def list_user_tags(self, user_id: int) -> List[Tag]:
        """
        Tags on the user's own master items plus tags on master items of
        lists shared with the user, one per text, sorted by text.
        """
        tags = {}
        for tag in self.tag_repo.get_own_item_tags(user_id) + self.tag_repo.get_shared_item_tags(user_id):
            tags.setdefault(tag.text, tag)
        return [tags[text] for text in sorted(tags)]

    def delete_tag(self, user_id: int, text: str) -> dict:
        """Delete one of the user's tags and detach it from every item."""
        tag = self.tag_repo.get_by_text(user_id, text)
        if not tag:
            raise ResourceNotFoundException("Tag", text)

        with transaction(self.db):
            self.db.delete(tag)
            self.db.flush()

        return {"message": "Tag deleted"}
