__version__ = "0.1.0"

from .config import settings
from .database import Base, Database, get_db
from . import models
from . import schemas
from . import repositories
from . import services
from . import api
