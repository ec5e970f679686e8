"""COVID-19 trend analytics built on the disease.sh API."""

__version__ = "0.1.0"
