from .user import User
from .item import Item
from .build import Build
