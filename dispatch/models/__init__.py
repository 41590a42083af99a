from .deletion import *
from .log import *
from .revision import *
from .deleted_revision import *
from .deleted_page import *
