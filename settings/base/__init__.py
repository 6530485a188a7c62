# ruff: noqa

from .base import *
from .apps import *
from .database import *
from .devices import *
from .drf import *
from .internationalization import *
from .logging import *
from .middleware import *
from .sentry import *
from .templates import *
