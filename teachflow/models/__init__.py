from teachflow.models.user import User
from teachflow.models.contractor import Contractor, PaymentFrequency
from teachflow.models.student import Student, StudentStatus
from teachflow.models.class_record import ClassRecord, ClassStatus, LocationType
from teachflow.models.payment import Payment, PaymentStatus
