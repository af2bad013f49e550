"""
Bucket access policy documents.
"""

import json
from typing import Any, Dict

POLICY_VERSION = "2012-10-17"


def public_read_policy_document(bucket_name: str) -> Dict[str, Any]:
    """
    Policy granting anonymous GetObject on every object in the bucket.

    Write, list and delete stay ungranted.
    """
    return {
        "Version": POLICY_VERSION,
        "Statement": [
            {
                "Effect": "Allow",
                "Principal": {"AWS": ["*"]},
                "Action": ["s3:GetObject"],
                "Resource": [f"arn:aws:s3:::{bucket_name}/*"],
            }
        ],
    }


def build_public_read_policy(bucket_name: str) -> str:
    """Serialized form of :func:`public_read_policy_document`."""
    return json.dumps(public_read_policy_document(bucket_name))
