# Schemas package (re-export feature modules for stable imports)
from .uploads.upload import *
from .common.common import *
