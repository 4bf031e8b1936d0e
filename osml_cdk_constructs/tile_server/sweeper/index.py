import boto3
import os
import time
from boto3.dynamodb.conditions import Attr

STATUS_IN_PROGRESS = "IN_PROGRESS"
STATUS_FAILED = "FAILED"


def find_stuck_jobs(table, cutoff):
    """Scan the job table for in-progress jobs started before the cutoff (epoch seconds)"""
    scan_kwargs = {
        "FilterExpression": Attr("status").eq(STATUS_IN_PROGRESS) & Attr("start_time").lt(cutoff)
    }
    items = []
    while True:
        response = table.scan(**scan_kwargs)
        items.extend(response.get("Items", []))
        last_key = response.get("LastEvaluatedKey")
        if not last_key:
            return items
        scan_kwargs["ExclusiveStartKey"] = last_key


def fail_job(table, viewpoint_id, now):
    """Mark a job FAILED, unless it finished since the scan. Returns True if it was updated"""
    try:
        table.update_item(
            Key={"viewpoint_id": viewpoint_id},
            UpdateExpression="SET #status = :failed, end_time = :now, error_message = :message",
            ConditionExpression="#status = :in_progress",
            ExpressionAttributeNames={"#status": "status"},
            ExpressionAttributeValues={
                ":failed": STATUS_FAILED,
                ":in_progress": STATUS_IN_PROGRESS,
                ":now": now,
                ":message": "Job timed out and was failed by the sweeper"
            }
        )
        return True
    except table.meta.client.exceptions.ConditionalCheckFailedException:
        print(f"Job {viewpoint_id} is no longer in progress, skipping")
        return False


def lambda_handler(event, context):
    try:
        table = boto3.resource("dynamodb").Table(os.environ["JOB_TABLE"])
        job_timeout = int(os.environ.get("JOB_TIMEOUT", "1800"))

        now = int(time.time())
        stuck_jobs = find_stuck_jobs(table, now - job_timeout)
        print(f"Found {len(stuck_jobs)} jobs in progress for more than {job_timeout} seconds")

        swept = 0
        for job in stuck_jobs:
            if fail_job(table, job["viewpoint_id"], now):
                print(f"Failed stuck job: {job['viewpoint_id']}")
                swept += 1

        return {"swept": swept}

    except Exception as e:
        print(f"Error sweeping job table: {str(e)}")
        raise
