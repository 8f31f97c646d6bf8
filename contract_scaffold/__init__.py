"""contract-scaffold: generate and build web3j Gradle projects."""

__version__ = "0.1.0"
