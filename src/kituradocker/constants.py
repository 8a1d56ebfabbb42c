"""Static defaults for kituradocker."""

SWIFT_VERSIONS = ("5.0.3", "5.1.5", "5.2.5", "5.3.3")

# Given a target swift version, which aliases should exist.
SWIFT_ALIASES = {
    "5.3.3": ("5.3", "5", "latest"),
    "5.2.5": ("5.2",),
    "5.1.5": ("5.1",),
    "5.0.3": ("5.0",),
}

SWIFT_CI_REPOSITORY = "kitura/swift-ci"
SWIFT_DEV_REPOSITORY = "kitura/swift-dev"
SWIFT_BASE_IMAGE = "swift"

MANIFEST_NAME = "Dockerfile"
LATEST_ALIAS = "latest"
DEFAULT_CONFIG_FILE = ".kituradocker.yml"
