VERSION = "0.3.0"
LICENSE = "MIT"
AUTHORS = "todotm contributors"
# Empty until the project has a public home
REPOSITORY = ""
