from prometheus_client import Counter

ORDERS_PLACED = Counter(
    "orders_placed_total",
    "Order placement attempts by outcome",
    ["outcome"],  # success | not_found | error
)
