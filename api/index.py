"""Serverless entrypoint for the document accessibility checker API."""

from mangum import Mangum

from doc_a11y.app import app

# Serverless handler
handler = Mangum(app, lifespan="off")
