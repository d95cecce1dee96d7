pytest_plugins = [
    "tests.fixtures.auth_fixtures",
    "tests.fixtures.http_fixtures",
    "tests.fixtures.message_fixtures",
    "tests.fixtures.cart_fixtures",
]
