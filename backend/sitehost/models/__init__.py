# Import every model so metadata (create_all, migrations) sees all tables
from .tenant import Tenant
from .user import User
from .site import Site
from .site_version import SiteVersion
from .audit_log import AuditLog
