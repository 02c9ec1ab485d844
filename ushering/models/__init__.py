from .church import Church, ChurchPosition, ChurchZone  # noqa: F401
from .region import Lingkungan, Wilayah  # noqa: F401
from .mass import Mass, MassZone  # noqa: F401
from .event import Event, EventUsher  # noqa: F401
from .user import User  # noqa: F401
