# Import models so Base metadata is aware of them
from .storage import StoredItem  # noqa: F401
