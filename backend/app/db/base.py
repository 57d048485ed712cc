from backend.app.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all in tests
from backend.app.models.user import User  # noqa: F401
from backend.app.models.user_profile import UserProfile  # noqa: F401
from backend.app.models.client_profile import ClientProfile  # noqa: F401
from backend.app.models.invoice_folder import InvoiceFolder  # noqa: F401
from backend.app.models.invoice import Invoice  # noqa: F401
from backend.app.models.tag import Tag  # noqa: F401
from backend.app.models.status_log import StatusLog  # noqa: F401
