# Django settings file, pulls in settings from submodules
from .base import *
from .ceramic import *
from .eas import *
from .feature_flags import *
from .iam import *
