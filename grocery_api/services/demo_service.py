"""
Demo tenant.

One well-known account serves every anonymous visitor. Each demo login
wipes whatever that account owns and re-seeds a small catalog, so
concurrent demo sessions share, and can overwrite, the same data.
"""
import logging

from sqlalchemy.orm import Session

from grocery_api.config import settings
from grocery_api.models.grocery_list import GroceryList
from grocery_api.models.tag import TagColor
from grocery_api.models.user import User
from grocery_api.repositories.grocery_list_repository import GroceryListRepository
from grocery_api.repositories.master_list_repository import MasterListRepository
from grocery_api.repositories.shared_list_repository import SharedListRepository
from grocery_api.repositories.tag_repository import TagRepository
from grocery_api.repositories.userRepository import UserRepository
from grocery_api.utils.security import get_password_hash

logger = logging.getLogger(__name__)

DEMO_TAGS = [
    ("Fruit", TagColor.GREEN),
    ("Veggies", TagColor.TEAL),
    ("Dairy", TagColor.BLUE),
    ("Bakery", TagColor.YELLOW),
    ("Meat", TagColor.RED),
    ("Snacks", TagColor.PURPLE),
]

DEMO_ITEMS = [
    ("Apples", ["Fruit"]),
    ("Bananas", ["Fruit", "Snacks"]),
    ("Bread", ["Bakery"]),
    ("Milk", ["Dairy"]),
    ("Cheese", ["Dairy"]),
    ("Chicken", ["Meat"]),
    ("Broccoli", ["Veggies"]),
    ("Carrots", ["Veggies"]),
    ("Chips", ["Snacks"]),
]

DEMO_LISTS = [
    ("Weekly Groceries", ["Apples", "Bananas", "Milk", "Bread", "Broccoli"]),
    ("Party Supplies", ["Chips", "Cheese", "Carrots"]),
]


class DemoService:
    """Creates or resets the demo account. Runs inside the caller's transaction."""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.master_list_repo = MasterListRepository(db)
        self.grocery_list_repo = GroceryListRepository(db)
        self.tag_repo = TagRepository(db)
        self.shared_list_repo = SharedListRepository(db)

    def reset_demo_tenant(self) -> User:
        user = self.user_repo.get_by_email(settings.DEMO_EMAIL)
        if user is None:
            user = self.user_repo.create(
                User(
                    email=settings.DEMO_EMAIL,
                    hashed_password=get_password_hash(settings.DEMO_PASSWORD),
                    name=settings.DEMO_NAME,
                    is_demo=True,
                )
            )
            logger.info("Created demo tenant %s", user.id)
        else:
            self._wipe(user)
            logger.info("Reset demo tenant %s", user.id)

        self._seed(user)
        return user

    def _wipe(self, user: User) -> None:
        self.shared_list_repo.delete_for_user(user.id)

        for grocery_list in self.grocery_list_repo.get_by_owner(user.id, limit=None):
            self.db.delete(grocery_list)

        master_list = self.master_list_repo.get_by_user(user.id)
        if master_list:
            self.db.delete(master_list)

        for tag in list(user.tags):
            self.db.delete(tag)

        self.db.flush()
        self.db.expire(user)

    def _seed(self, user: User) -> None:
        master_list = self.master_list_repo.get_or_create(user.id)

        tags = {
            text: self.tag_repo.get_or_create(user.id, text, color)
            for text, color in DEMO_TAGS
        }

        master_items = {}
        for name, tag_texts in DEMO_ITEMS:
            item, _ = self.master_list_repo.get_or_create_item(master_list.id, name)
            self.master_list_repo.set_item_tags(item, [tags[text] for text in tag_texts])
            master_items[name] = item

        for list_name, item_names in DEMO_LISTS:
            grocery_list = self.grocery_list_repo.create(
                GroceryList(name=list_name, owner_id=user.id)
            )
            for name in item_names:
                self.grocery_list_repo.add_item(grocery_list.id, master_items[name].id)
