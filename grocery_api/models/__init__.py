from grocery_api.models.base import Base, BaseModel
from grocery_api.models.associations import item_tags_master
from grocery_api.models.user import User, UserSession
from grocery_api.models.master_list import MasterList, MasterListItem
from grocery_api.models.tag import Tag, TagColor
from grocery_api.models.grocery_list import GroceryList, GroceryItem
from grocery_api.models.shared_list import SharedList, ShareStatus

__all__ = [
    # Base
    "Base",
    "BaseModel",
    "item_tags_master",
    # Identity
    "User",
    "UserSession",
    # Master list
    "MasterList",
    "MasterListItem",
    # Tags
    "Tag",
    "TagColor",
    # Grocery lists
    "GroceryList",
    "GroceryItem",
    # Sharing
    "SharedList",
    "ShareStatus",
]
