from hours.app.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all
from hours.app.models.client import Client  # noqa: F401
from hours.app.models.contract import Contract  # noqa: F401
from hours.app.models.recipient import Recipient  # noqa: F401
from hours.app.models.payment_details import PaymentDetails  # noqa: F401
from hours.app.models.business_info import BusinessInfo  # noqa: F401
from hours.app.models.time_entry import TimeEntry  # noqa: F401
from hours.app.models.invoice import Invoice  # noqa: F401
from hours.app.models.migration_record import MigrationRecord  # noqa: F401
