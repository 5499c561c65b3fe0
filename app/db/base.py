# Import every model so Base.metadata and the relationship registry are complete
from app.db.session import Base  # noqa: F401
from app.models.user import User  # noqa: F401
from app.models.hall import Hall  # noqa: F401
from app.models.booking import Booking, BookingDay  # noqa: F401
from app.models.payment import Payment  # noqa: F401
from app.models.notification import Notification  # noqa: F401
