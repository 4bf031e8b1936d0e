#!/usr/bin/env python3
import os
from aws_cdk import App, Environment
from osml_cdk_constructs.osml_account import OSMLAccount
from osml_cdk_constructs.osml_stack import OSMLDeploymentConfig, OSMLStack

app = App()

# Account and region come from ACCOUNT_ID / REGION (or a local .env file),
# falling back to the CDK CLI defaults
account = OSMLAccount.from_env()

print(f"Deploying to Account: {account.id}, Region: {account.region}")

OSMLStack(app, f"{account.name.capitalize()}Stack",
    account=account,
    deployment_config=OSMLDeploymentConfig(
        vpc_id=os.environ.get("VPC_ID"),
        image_tag=os.environ.get("IMAGE_TAG", "latest")
    ),
    env=Environment(
        account=account.id,
        region=account.region
    )
)

app.synth()
