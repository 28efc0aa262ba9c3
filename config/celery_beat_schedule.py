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
Celery Beat schedule for periodic knowledge base data sync
"""

from typing import Any, Dict, List

from celery.schedules import ParseException, crontab

from vectorkb.config import SyncSchedule, load_ingestion_settings

START_INGESTION_TASK = "vectorkb.tasks.celery_tasks.start_ingestion_job_task"


def parse_cron(expression: str) -> crontab:
    """Build a crontab from a five-field cron expression"""
    try:
        return crontab.from_string(" ".join(expression.split()))
    except (ParseException, ValueError) as e:
        raise ValueError(f"Invalid cron expression {expression!r}: {e}") from e


def build_beat_schedule(schedules: List[SyncSchedule]) -> Dict[str, Dict[str, Any]]:
    """One beat entry per configured knowledge base data source"""
    beat_schedule = {}
    for schedule in schedules:
        beat_schedule[f"sync-{schedule.knowledge_base_id}-{schedule.data_source_id}"] = {
            'task': START_INGESTION_TASK,
            'schedule': parse_cron(schedule.cron),
            'args': (schedule.knowledge_base_id, schedule.data_source_id),
            'options': {
                'expires': 300,  # Drop the run if no worker picked it up within 5 minutes
            }
        }
    return beat_schedule


CELERY_BEAT_SCHEDULE = build_beat_schedule(load_ingestion_settings().ingestion_sync_schedules)
