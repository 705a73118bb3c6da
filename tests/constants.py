ORGANIZER_ID = "organizer-1"
OTHER_ORGANIZER_ID = "organizer-2"
CUSTOMER_ID = "customer-1"
OTHER_CUSTOMER_ID = "customer-2"
