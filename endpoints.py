# Pinata REST API; see https://docs.pinata.cloud for the full reference.

BASE_URL = "https://api.pinata.cloud"

GATEWAY_URL = "https://gateway.pinata.cloud"

AUTH = {
    "test_authentication": {
        "method": "GET",
        "path": "/data/testAuthentication",
    },
}

PINS = {
    "list": {
        "method": "GET",
        "path": "/data/pinList",
    },
    "pin_file": {
        "method": "POST",
        "path": "/pinning/pinFileToIPFS",
    },
    "unpin": {
        "method": "DELETE",
        "path": "/pinning/unpin/{hash}",
    },
}
