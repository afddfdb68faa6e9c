# Support
from complaint_desk.models.support.complaint_models import Complaint
