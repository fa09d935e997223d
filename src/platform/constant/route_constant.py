# API Route Constants

# Base API
API_BASE = '/api'

# Event booking routes
EVENT_BASE = f'{API_BASE}/event'
EVENT_BOOK = f'{EVENT_BASE}/{{event_id}}/book'
EVENT_MY_ORDERS = f'{EVENT_BASE}/my_orders'
EVENT_MY_TICKETS = f'{EVENT_BASE}/my_tickets'

# Payment routes
PAYMENT_BASE = f'{API_BASE}/payment'
PAYMENT_RAZORPAY_WEBHOOK = f'{PAYMENT_BASE}/webhook/razorpay'
PAYMENT_EXPIRE_ORDERS = f'{PAYMENT_BASE}/expire_orders'

# Gateway headers
RAZORPAY_SIGNATURE_HEADER = 'X-Razorpay-Signature'
