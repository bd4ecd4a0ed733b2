import pytest

from app.middleware.metrics import _normalise_path


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/api/orders/42", "/api/orders/{order_id}"),
        ("/api/restaurants/7", "/api/restaurants/{restaurant_id}"),
        ("/api/restaurants", "/api/restaurants"),
        ("/health", "/health"),
    ],
)
def test_normalise_path(path, expected):
    assert _normalise_path(path) == expected
