from __future__ import annotations

from .access import *
from .requests import *
from .wire import *
from .workspaces import *
