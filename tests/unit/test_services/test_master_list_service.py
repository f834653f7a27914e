import pytest
from sqlalchemy.orm import Session
from grocery_api.services.master_list_service import MasterListService
from grocery_api.services.grocery_list_service import GroceryListService
from grocery_api.services.sharing_service import SharingService
from grocery_api.repositories.master_list_repository import MasterListRepository
from grocery_api.schemas.master_list import MasterItemCreate, MasterItemUpdate
from grocery_api.schemas.grocery_list import GroceryListCreate, GroceryItemCreate
from grocery_api.schemas.tag import TagCreate
from grocery_api.models.master_list import MasterList, MasterListItem
from grocery_api.models.grocery_list import GroceryItem
from grocery_api.models.tag import Tag, TagColor
from grocery_api.core.exception import (
    AuthorizationException,
    ConflictException,
    DuplicateResourceException,
    ValidationException,
)


@pytest.mark.unit
class TestMasterListService:
    """Unit tests for MasterListService."""

    def test_master_list_created_once(self, db_session: Session, test_user):
        service = MasterListService(db_session)

        first = service.get_or_create_master_list(test_user.id)
        second = service.get_or_create_master_list(test_user.id)

        assert first.id == second.id
        assert db_session.query(MasterList).filter_by(user_id=test_user.id).count() == 1

    def test_add_item_is_case_insensitive(self, db_session: Session, test_user):
        service = MasterListService(db_session)

        item, created = service.add_item(test_user.id, MasterItemCreate(name="Milk"))
        again, created_again = service.add_item(test_user.id, MasterItemCreate(name="  mILK "))

        assert created is True
        assert created_again is False
        assert again.id == item.id
        assert again.name == "Milk"

    def test_add_item_attaches_tags(self, db_session: Session, test_user):
        service = MasterListService(db_session)

        item, _ = service.add_item(
            test_user.id,
            MasterItemCreate(name="Milk", tags=[TagCreate(text="Dairy", color=TagColor.BLUE)]),
        )

        assert [tag.text for tag in item.tags] == ["Dairy"]
        assert item.tags[0].color == TagColor.BLUE

    def test_get_master_list_orders_by_creation(self, db_session: Session, test_user):
        service = MasterListService(db_session)
        for name in ["Bread", "Apples", "Milk"]:
            service.add_item(test_user.id, MasterItemCreate(name=name))

        _, items = service.get_master_list(test_user.id)

        assert [item.name for item in items] == ["Bread", "Apples", "Milk"]

    def test_update_renames_and_retags(self, db_session: Session, test_user):
        service = MasterListService(db_session)
        item, _ = service.add_item(
            test_user.id, MasterItemCreate(name="Milk", tags=[TagCreate(text="Dairy")])
        )

        updated = service.update_item(
            test_user.id,
            item.id,
            MasterItemUpdate(name="Oat milk", tags=[TagCreate(text="Vegan", color=TagColor.GREEN)]),
        )

        assert updated.name == "Oat milk"
        assert [tag.text for tag in updated.tags] == ["Vegan"]

    def test_reusing_tag_text_updates_color(self, db_session: Session, test_user):
        service = MasterListService(db_session)
        service.add_item(
            test_user.id, MasterItemCreate(name="Milk", tags=[TagCreate(text="Dairy", color=TagColor.BLUE)])
        )
        cheese, _ = service.add_item(test_user.id, MasterItemCreate(name="Cheese"))

        service.update_item(
            test_user.id, cheese.id, MasterItemUpdate(tags=[TagCreate(text="Dairy", color=TagColor.RED)])
        )

        tags = db_session.query(Tag).filter_by(user_id=test_user.id).all()
        assert len(tags) == 1
        assert tags[0].color == TagColor.RED

    def test_rename_into_existing_name_conflicts(self, db_session: Session, test_user):
        service = MasterListService(db_session)
        service.add_item(test_user.id, MasterItemCreate(name="Milk"))
        bread, _ = service.add_item(test_user.id, MasterItemCreate(name="Bread"))

        with pytest.raises(DuplicateResourceException):
            service.update_item(test_user.id, bread.id, MasterItemUpdate(name="milk"))

    def test_update_without_name_or_tags_toggles_completion(self, db_session: Session, test_user):
        service = MasterListService(db_session)
        item, _ = service.add_item(test_user.id, MasterItemCreate(name="Milk"))

        assert service.update_item(test_user.id, item.id, MasterItemUpdate()).completed is True
        assert service.update_item(test_user.id, item.id, MasterItemUpdate()).completed is False
        assert service.update_item(
            test_user.id, item.id, MasterItemUpdate(completed=False)
        ).completed is False

    def test_update_foreign_item_is_forbidden(self, db_session: Session, test_user, other_user):
        service = MasterListService(db_session)
        item, _ = service.add_item(other_user.id, MasterItemCreate(name="Milk"))

        with pytest.raises(AuthorizationException):
            service.update_item(test_user.id, item.id, MasterItemUpdate(name="Mine"))

    def test_delete_removes_item_from_every_list(self, db_session: Session, test_user):
        lists = GroceryListService(db_session)
        weekly = lists.create_list(test_user, GroceryListCreate(name="Weekly"))
        party = lists.create_list(test_user, GroceryListCreate(name="Party"))
        item = lists.add_item(weekly.id, test_user, GroceryItemCreate(name="Chips"))
        lists.add_item(party.id, test_user, GroceryItemCreate(name="chips"))
        master_item_id = item.master_item_id

        service = MasterListService(db_session)
        usage = service.get_item_usage(test_user.id, master_item_id)
        assert sorted(u.list_name for u in usage) == ["Party", "Weekly"]

        service.delete_item(test_user.id, master_item_id)

        assert db_session.get(MasterListItem, master_item_id) is None
        assert db_session.query(GroceryItem).filter_by(master_item_id=master_item_id).count() == 0

    def test_delete_foreign_item_is_forbidden(self, db_session: Session, test_user, other_user):
        service = MasterListService(db_session)
        item, _ = service.add_item(other_user.id, MasterItemCreate(name="Milk"))

        with pytest.raises(AuthorizationException):
            service.delete_item(test_user.id, item.id)

        assert db_session.get(MasterListItem, item.id) is not None

    def test_add_blank_name_is_rejected(self, db_session: Session, test_user):
        service = MasterListService(db_session)

        with pytest.raises(ValidationException):
            service.add_item(test_user.id, MasterItemCreate(name="   "))

        assert db_session.query(MasterListItem).count() == 0

    def test_rename_to_blank_is_rejected(self, db_session: Session, test_user):
        service = MasterListService(db_session)
        item, _ = service.add_item(test_user.id, MasterItemCreate(name="Milk"))

        with pytest.raises(ValidationException):
            service.update_item(test_user.id, item.id, MasterItemUpdate(name="   "))

        assert db_session.get(MasterListItem, item.id).name == "Milk"

    def test_rename_cannot_duplicate_a_name_in_a_shared_list(
        self, db_session: Session, test_user, other_user
    ):
        lists = GroceryListService(db_session)
        grocery_list = lists.create_list(test_user, GroceryListCreate(name="Weekly"))
        sharing = SharingService(db_session)
        share = sharing.share_list(test_user, grocery_list.id, other_user.email)
        sharing.respond_to_share(share.id, other_user, "accepted")

        lists.add_item(grocery_list.id, test_user, GroceryItemCreate(name="Milk"))
        eggs = lists.add_item(grocery_list.id, other_user, GroceryItemCreate(name="Eggs"))

        # The recipient's copy of "Milk" is not what the list entry points at
        service = MasterListService(db_session)
        own_milk = MasterListRepository(db_session).find_user_item_by_name(other_user.id, "Milk")
        service.delete_item(other_user.id, own_milk.id)

        with pytest.raises(ConflictException):
            service.update_item(other_user.id, eggs.master_item_id, MasterItemUpdate(name="milk"))

        names = sorted(item.name for item in lists.get_list_items(grocery_list.id, test_user))
        assert names == ["Eggs", "Milk"]
