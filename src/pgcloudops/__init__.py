"""
pgcloudops - schema sync and Cloud Run deployment helpers for pgAdmin
"""

__version__ = "0.1.0"

from .deploy import Deployer
from .errors import OpsError
from .sync import SchemaSync

__all__ = ["Deployer", "OpsError", "SchemaSync"]
