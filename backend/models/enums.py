from enum import Enum

class BloodGroup(str, Enum):
    A_POSITIVE = "A+"
    A_NEGATIVE = "A-"
    B_POSITIVE = "B+"
    B_NEGATIVE = "B-"
    AB_POSITIVE = "AB+"
    AB_NEGATIVE = "AB-"
    O_POSITIVE = "O+"
    O_NEGATIVE = "O-"

class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"
    UNDISCLOSED = "Prefer not to say"

class District(str, Enum):
    ARIYALUR = "Ariyalur"
    CHENGALPATTU = "Chengalpattu"
    CHENNAI = "Chennai"
    COIMBATORE = "Coimbatore"
    CUDDALORE = "Cuddalore"
    DHARMAPURI = "Dharmapuri"
    DINDIGUL = "Dindigul"
    ERODE = "Erode"
    KALLAKURICHI = "Kallakurichi"
    KANCHIPURAM = "Kanchipuram"
    KANYAKUMARI = "Kanyakumari"
    KARUR = "Karur"
    KRISHNAGIRI = "Krishnagiri"
    MADURAI = "Madurai"
    MAYILADUTHURAI = "Mayiladuthurai"
    NAGAPATTINAM = "Nagapattinam"
    NAMAKKAL = "Namakkal"
    NILGIRIS = "Nilgiris"
    PERAMBALUR = "Perambalur"
    PUDUKKOTTAI = "Pudukkottai"
    RAMANATHAPURAM = "Ramanathapuram"
    RANIPET = "Ranipet"
    SALEM = "Salem"
    SIVAGANGA = "Sivaganga"
    TENKASI = "Tenkasi"
    THANJAVUR = "Thanjavur"
    THENI = "Theni"
    THOOTHUKUDI = "Thoothukudi"
    TIRUCHIRAPPALLI = "Tiruchirappalli"
    TIRUNELVELI = "Tirunelveli"
    TIRUPATHUR = "Tirupathur"
    TIRUPPUR = "Tiruppur"
    TIRUVALLUR = "Tiruvallur"
    TIRUVANNAMALAI = "Tiruvannamalai"
    TIRUVARUR = "Tiruvarur"
    VELLORE = "Vellore"
    VILUPPURAM = "Viluppuram"
    VIRUDHUNAGAR = "Virudhunagar"

class Availability(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    OTHER = "other"

class DonorContactOutcome(str, Enum):
    CONTACTED = "contacted"
    UNAVAILABLE = "unavailable"
    DONATED_RECENTLY = "donated_recently"

class Urgency(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EMERGENCY = "emergency"

class RequestStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    FULFILLED = "fulfilled"
    CANCELLED = "cancelled"
    EXPIRED = "expired"

class ContactStatus(str, Enum):
    NOT_CONTACTED = "not_contacted"
    CONTACTED = "contacted"
    CONFIRMED = "confirmed"
    DECLINED = "declined"
    UNAVAILABLE = "unavailable"
