import pytest
from sqlalchemy.orm import Session
from grocery_api.services.sharing_service import SharingService
from grocery_api.services.grocery_list_service import GroceryListService
from grocery_api.services.userService import UserService
from grocery_api.services.list_access import ListAccess, resolve_list_access
from grocery_api.repositories.master_list_repository import MasterListRepository
from grocery_api.schemas.grocery_list import GroceryListCreate, GroceryItemCreate
from grocery_api.models.grocery_list import GroceryList
from grocery_api.models.shared_list import SharedList, ShareStatus
from grocery_api.models.user import User
from grocery_api.core.exception import ConflictException, ResourceNotFoundException


def master_names(db_session, user_id):
    repo = MasterListRepository(db_session)
    master_list = repo.get_by_user(user_id)
    return repo.get_item_names(master_list.id) if master_list else set()


@pytest.fixture
def groceries(db_session, test_user):
    """Owner's list "Groceries" holding "Milk"."""
    service = GroceryListService(db_session)
    grocery_list = service.create_list(test_user, GroceryListCreate(name="Groceries"))
    service.add_item(grocery_list.id, test_user, GroceryItemCreate(name="Milk"))
    return grocery_list


@pytest.mark.unit
class TestShareList:

    def test_share_creates_pending_invitation(self, db_session: Session, test_user, other_user, groceries):
        share = SharingService(db_session).share_list(test_user, groceries.id, "B@Example.com")

        assert share.status == ShareStatus.PENDING
        assert share.shared_with_email == "b@example.com"
        assert share.shared_with_id == other_user.id
        assert db_session.get(GroceryList, groceries.id).is_shared is False

    def test_share_with_unknown_email_stays_unbound(self, db_session: Session, test_user, groceries):
        share = SharingService(db_session).share_list(test_user, groceries.id, "later@example.com")
        assert share.shared_with_id is None

    def test_share_foreign_list_is_not_found(self, db_session: Session, test_user, other_user, groceries):
        with pytest.raises(ResourceNotFoundException):
            SharingService(db_session).share_list(other_user, groceries.id, "c@example.com")

    def test_self_share_conflicts(self, db_session: Session, test_user, groceries):
        with pytest.raises(ConflictException):
            SharingService(db_session).share_list(test_user, groceries.id, "TEST@example.com")

    def test_second_active_share_conflicts(self, db_session: Session, test_user, other_user, third_user, groceries):
        service = SharingService(db_session)
        service.share_list(test_user, groceries.id, other_user.email)

        with pytest.raises(ConflictException):
            service.share_list(test_user, groceries.id, third_user.email)


@pytest.mark.unit
class TestRespondToShare:

    def test_accept_binds_recipient_and_copies_items(self, db_session: Session, test_user, other_user, groceries):
        service = SharingService(db_session)
        share = service.share_list(test_user, groceries.id, other_user.email)

        result = service.respond_to_share(share.id, other_user, "accepted")

        assert result.share.status == ShareStatus.ACCEPTED
        assert result.share.shared_with_id == other_user.id
        grocery_list = db_session.get(GroceryList, groceries.id)
        assert grocery_list.is_shared is True
        assert grocery_list.shared_with_email == "b@example.com"
        assert "milk" in master_names(db_session, other_user.id)
        assert resolve_list_access(db_session, grocery_list, other_user) is ListAccess.SHARED

    def test_accept_skips_names_already_in_master_list(self, db_session: Session, test_user, other_user, groceries):
        own = GroceryListService(db_session).create_list(other_user, GroceryListCreate(name="Mine"))
        GroceryListService(db_session).add_item(own.id, other_user, GroceryItemCreate(name="MILK"))
        service = SharingService(db_session)
        share = service.share_list(test_user, groceries.id, other_user.email)

        service.respond_to_share(share.id, other_user, "accepted")

        repo = MasterListRepository(db_session)
        items = repo.get_items(repo.get_by_user(other_user.id).id)
        assert [item.name for item in items] == ["MILK"]

    def test_accept_by_email_for_account_created_later(self, db_session: Session, test_user, groceries):
        from grocery_api.services.authService import AuthService
        from grocery_api.schemas.user import UserCreate

        service = SharingService(db_session)
        share = service.share_list(test_user, groceries.id, "late@example.com")
        late = AuthService(db_session).register(UserCreate(email="late@example.com", password="secret1"))
        late_user = AuthService(db_session).resolve_session(late.token)

        assert [s.id for s in service.list_pending_shares(late_user)] == [share.id]
        service.respond_to_share(share.id, late_user, "accepted")

        assert db_session.get(SharedList, share.id).shared_with_id == late_user.id

    def test_second_answer_conflicts(self, db_session: Session, test_user, other_user, groceries):
        service = SharingService(db_session)
        share = service.share_list(test_user, groceries.id, other_user.email)
        service.respond_to_share(share.id, other_user, "accepted")

        with pytest.raises(ConflictException) as exc_info:
            service.respond_to_share(share.id, other_user, "rejected")
        assert exc_info.value.detail == "This share has already been accepted"

    def test_share_addressed_to_someone_else_is_not_found(
        self, db_session: Session, test_user, other_user, third_user, groceries
    ):
        service = SharingService(db_session)
        share = service.share_list(test_user, groceries.id, other_user.email)

        with pytest.raises(ResourceNotFoundException):
            service.respond_to_share(share.id, third_user, "accepted")

    def test_reject_deletes_share_and_clears_flag(self, db_session: Session, test_user, other_user, groceries):
        service = SharingService(db_session)
        share = service.share_list(test_user, groceries.id, other_user.email)

        result = service.respond_to_share(share.id, other_user, "rejected")

        assert result.share.status == ShareStatus.REJECTED
        assert db_session.get(SharedList, share.id) is None
        grocery_list = db_session.get(GroceryList, groceries.id)
        assert grocery_list.is_shared is False
        assert grocery_list.shared_with_email is None

    def test_reject_one_of_several_pending_keeps_flag(
        self, db_session: Session, test_user, other_user, third_user, groceries
    ):
        # Only one active share can be created through the service, so the
        # second pending invitation is inserted directly.
        first = SharedList(
            list_id=groceries.id, owner_id=test_user.id,
            shared_with_email=other_user.email, shared_with_id=other_user.id,
            status=ShareStatus.PENDING,
        )
        second = SharedList(
            list_id=groceries.id, owner_id=test_user.id,
            shared_with_email=third_user.email, shared_with_id=third_user.id,
            status=ShareStatus.PENDING,
        )
        db_session.add_all([first, second])
        db_session.get(GroceryList, groceries.id).is_shared = True
        db_session.commit()

        SharingService(db_session).respond_to_share(first.id, other_user, "rejected")

        assert db_session.get(GroceryList, groceries.id).is_shared is True

        SharingService(db_session).respond_to_share(second.id, third_user, "rejected")

        assert db_session.get(GroceryList, groceries.id).is_shared is False


@pytest.mark.unit
class TestShareReadModels:

    def test_pending_lists_only_unanswered(self, db_session: Session, test_user, other_user, groceries):
        service = SharingService(db_session)
        share = service.share_list(test_user, groceries.id, other_user.email)

        pending = service.list_pending_shares(other_user)
        assert [s.id for s in pending] == [share.id]
        assert pending[0].list_name == "Groceries"
        assert pending[0].owner_email == test_user.email

        service.respond_to_share(share.id, other_user, "accepted")
        assert service.list_pending_shares(other_user) == []

    def test_accepted_read_includes_items(self, db_session: Session, test_user, other_user, groceries):
        service = SharingService(db_session)
        share = service.share_list(test_user, groceries.id, other_user.email)
        service.respond_to_share(share.id, other_user, "accepted")

        accepted = service.list_accepted_shares(other_user)

        assert len(accepted) == 1
        assert accepted[0].list_id == groceries.id
        assert [item.name for item in accepted[0].items] == ["Milk"]

    def test_accepted_read_syncs_items_added_later(self, db_session: Session, test_user, other_user, groceries):
        """Groceries scenario: Eggs added after acceptance reach B on the next read."""
        service = SharingService(db_session)
        share = service.share_list(test_user, groceries.id, other_user.email)
        service.respond_to_share(share.id, other_user, "accepted")

        # Added straight to the list so no write-time fan-out happens
        from grocery_api.repositories.grocery_list_repository import GroceryListRepository
        owner_master = MasterListRepository(db_session).get_by_user(test_user.id)
        eggs, _ = MasterListRepository(db_session).get_or_create_item(owner_master.id, "Eggs")
        GroceryListRepository(db_session).add_item(groceries.id, eggs.id)
        db_session.commit()
        assert "eggs" not in master_names(db_session, other_user.id)

        service.list_accepted_shares(other_user)

        assert "eggs" in master_names(db_session, other_user.id)


@pytest.mark.unit
class TestRecipientDeletion:

    def test_deleting_recipient_withdraws_share(self, db_session: Session, test_user, other_user, groceries):
        sharing = SharingService(db_session)
        share = sharing.share_list(test_user, groceries.id, other_user.email)
        sharing.respond_to_share(share.id, other_user, "accepted")

        UserService(db_session).delete_user(other_user.id)

        grocery_list = db_session.get(GroceryList, groceries.id)
        assert grocery_list.is_shared is False
        assert grocery_list.shared_with_email is None
        assert db_session.query(SharedList).filter_by(list_id=groceries.id).count() == 0

        # Someone registering the freed email gets nothing
        newcomer = User(email="b@example.com", hashed_password="x", is_demo=False)
        db_session.add(newcomer)
        db_session.commit()

        assert resolve_list_access(db_session, grocery_list, newcomer) is ListAccess.NONE
        assert sharing.list_accepted_shares(newcomer) == []

    def test_deleting_recipient_keeps_owner_list(self, db_session: Session, test_user, other_user, groceries):
        sharing = SharingService(db_session)
        share = sharing.share_list(test_user, groceries.id, other_user.email)
        sharing.respond_to_share(share.id, other_user, "accepted")

        UserService(db_session).delete_user(other_user.id)

        items = GroceryListService(db_session).get_list_items(groceries.id, test_user)
        assert [item.name for item in items] == ["Milk"]
