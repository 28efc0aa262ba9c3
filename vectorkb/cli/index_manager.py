#!/usr/bin/env python3
# Copyright 2025 ApeCloud, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
CLI tool for operating the vector index and knowledge base sync by hand

Usage:
    python -m vectorkb.cli.index_manager --help
    python -m vectorkb.cli.index_manager reconcile --event create-event.json
    python -m vectorkb.cli.index_manager start-ingestion --knowledge-base-id KB12345678 --data-source-id DS12345678
    python -m vectorkb.cli.index_manager render-policy --collection kb --account-id 123456789012 \\
        --read-write arn:aws:iam::123456789012:role/kb-service-role
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from vectorkb.config import LOG_FORMAT

logger = logging.getLogger(__name__)


def run_reconciliation(event_path: str, store=None):
    """Reconcile one change event read from a JSON file"""
    from vectorkb.config import load_index_store_settings
    from vectorkb.index.opensearch_store import OpenSearchIndexStore
    from vectorkb.index.reconciler import IndexReconciler, parse_change_event

    with open(event_path, "r", encoding="utf-8") as f:
        event = parse_change_event(json.load(f))

    if store is None:
        store = OpenSearchIndexStore.from_settings(load_index_store_settings())
    reconciler = IndexReconciler(store)

    # Unlike the function handler, report the internal outcome so failures are visible to the operator
    result = reconciler.apply(event)
    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    return result


def start_ingestion(knowledge_base_id: str, data_source_id: str, region: Optional[str] = None, client=None):
    """Start one ingestion job"""
    from vectorkb.ingestion.trigger import BedrockIngestionClient, IngestionTrigger

    trigger = IngestionTrigger(client or BedrockIngestionClient(region_name=region))
    trigger.trigger(knowledge_base_id, data_source_id)
    print(f"Started ingestion job for knowledge base {knowledge_base_id}, data source {data_source_id}")


def render_policy(
    collection: str,
    account_id: str,
    read: List[str],
    read_write: List[str],
    name: Optional[str] = None,
):
    """Print the data access policy document for the given grants"""
    from vectorkb.policy.arn_resolver import ArnResolver
    from vectorkb.policy.data_access_policy import DataAccessPolicy
    from vectorkb.policy.principals import parse_principal

    policy = DataAccessPolicy(collection, ArnResolver(account_id), name=name)
    for principal in read:
        policy.grant_read(parse_principal(principal))
    for principal in read_write:
        policy.grant_read_write(parse_principal(principal))

    print(json.dumps(policy.to_cfn_properties() | {"Policy": policy.to_document()}, indent=2, ensure_ascii=False))
    return policy


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Vector index and knowledge base sync CLI")
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Reconcile command
    reconcile_parser = subparsers.add_parser('reconcile', help='Apply a resource change event to the index store')
    reconcile_parser.add_argument('--event', required=True, help='Path to a JSON change event')

    # Start ingestion command
    ingestion_parser = subparsers.add_parser('start-ingestion', help='Start a knowledge base ingestion job')
    ingestion_parser.add_argument('--knowledge-base-id', required=True, help='Knowledge base ID')
    ingestion_parser.add_argument('--data-source-id', required=True, help='Data source ID')
    ingestion_parser.add_argument('--region', help='Region of the knowledge base (default: from environment)')

    # Render policy command
    policy_parser = subparsers.add_parser('render-policy', help='Print a data access policy document')
    policy_parser.add_argument('--collection', required=True, help='Collection name')
    policy_parser.add_argument('--account-id', required=True, help='Account that owns service roles')
    policy_parser.add_argument('--name', help='Policy name (default: derived from the collection)')
    policy_parser.add_argument('--read', action='append', default=[], help='Principal to grant read access')
    policy_parser.add_argument('--read-write', action='append', default=[],
                               help='Principal to grant read-write access')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        if args.command == 'reconcile':
            result = run_reconciliation(args.event)
            return 0 if result.success else 2
        elif args.command == 'start-ingestion':
            start_ingestion(args.knowledge_base_id, args.data_source_id, args.region)
        elif args.command == 'render-policy':
            render_policy(args.collection, args.account_id, args.read, args.read_write, args.name)
        else:
            print(f"Unknown command: {args.command}")
            return 1
    except Exception as e:
        logger.error(f"Command failed: {e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
