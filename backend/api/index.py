"""
Vercel Serverless Entry Point for the AI Brand Track API
Using Mangum for ASGI to AWS Lambda adapter
"""
from mangum import Mangum

from brandtrack.main import app

# Tables are managed outside the function, so lifespan startup is skipped
handler = Mangum(app, lifespan="off")
