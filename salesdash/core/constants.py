API_PREFIX = "/api"

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10

# Largest row offset a 64-bit SQL integer can hold.
MAX_ROW_OFFSET = 2**63 - 1

# (lower inclusive, upper exclusive); None means unbounded.
PRICE_BUCKETS = (
    (0, 100),
    (101, 200),
    (201, 300),
    (301, 400),
    (401, 500),
    (501, 600),
    (601, 700),
    (701, 800),
    (801, 900),
    (901, None),
)


def bucket_label(lower, upper):
    if upper is None:
        return "{}-above".format(lower)
    return "{}-{}".format(lower, upper)
