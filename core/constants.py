# core/constants.py
JOB_POSTER = 'jobPoster'
FREELANCER = 'freelancer'

JOB_OPEN = 'open'
JOB_IN_PROGRESS = 'in-progress'
JOB_COMPLETED = 'completed'
JOB_CANCELED = 'canceled'

JOB_STATUS_CHOICES = (
    (JOB_OPEN, 'Open'),                # Accepting bids
    (JOB_IN_PROGRESS, 'In Progress'),  # A bid has been accepted
    (JOB_COMPLETED, 'Completed'),      # Poster confirmed the work, payment settled
    (JOB_CANCELED, 'Canceled'),        # Poster closed the job before accepting a bid
)

BID_PENDING = 'pending'
BID_ACCEPTED = 'accepted'
BID_REJECTED = 'rejected'

BID_STATUS_CHOICES = (
    (BID_PENDING, 'Pending'),      # Freelancer bid, awaiting poster response
    (BID_ACCEPTED, 'Accepted'),    # Poster accepted the bid
    (BID_REJECTED, 'Rejected'),    # Poster rejected the bid, or another bid was accepted
)

PAYMENT_PENDING = 'pending'
PAYMENT_COMPLETED = 'completed'
PAYMENT_REFUNDED = 'refunded'

PAYMENT_STATUS_CHOICES = (
    (PAYMENT_PENDING, 'Pending'),
    (PAYMENT_COMPLETED, 'Completed'),
    (PAYMENT_REFUNDED, 'Refunded'),
)

MIN_DEADLINE_DAYS = 1
MAX_DEADLINE_DAYS = 10

MAX_MESSAGE_LENGTH = 10000
RECENT_MESSAGES_LIMIT = 50
