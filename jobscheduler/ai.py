"""
Client for the external schedule optimizer.

The optimizer is a text-generation model behind an Ollama-compatible
/api/generate endpoint. It receives the serialized schedule plus free-text
constraints and answers with a JSON envelope:

    {"optimizedSchedule": "<json string or object>", "explanation": "..."}

where optimizedSchedule holds {"jobs": [{"id", "scheduledSegments": [...]}]}.
"""
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List

import requests

from jobscheduler.logging_config import get_logger

logger = get_logger(__name__)


class OptimizerError(Exception):
    """The optimizer call failed or returned something we cannot use."""


@dataclass
class OptimizerResponse:
    jobs: List[Dict[str, Any]] = field(default_factory=list)
    explanation: str = ""


def build_prompt(schedule_data: Dict[str, Any], constraints: str) -> str:
    return f"""
You are an AI production scheduling assistant. Your task is to optimize a production schedule based on given constraints and priorities.

Here is the current production schedule in JSON format:
{json.dumps(schedule_data, indent=2)}

Here are the constraints and objectives for optimization:
{constraints}

Rules:
- Only schedule work Monday through Friday.
- Never assign more hours to a date than that date's capacity
  (capacityOverrides replace dailyCapacityByDay for their date).
- Schedule urgent jobs first.

Return JSON:
{{
  "optimizedSchedule": {{
    "jobs": [
      {{ "id": "job id", "name": "job name", "scheduledSegments": [{{ "date": "YYYY-MM-DD", "hours": 0 }}] }}
    ]
  }},
  "explanation": "Explain the changes made and the reasoning behind them"
}}
"""


def parse_optimizer_output(parsed: Any) -> OptimizerResponse:
    """
    Unwrap the optimizer's JSON envelope.
    
    Args:
        parsed: Decoded JSON returned by the model
        
    Returns:
        OptimizerResponse with the raw job dicts and the explanation
        
    Raises:
        OptimizerError: If the envelope or the job list is malformed
    """
    if not isinstance(parsed, dict):
        raise OptimizerError("Optimizer response is not a JSON object")
    
    schedule = parsed.get("optimizedSchedule")
    if isinstance(schedule, str):
        try:
            schedule = json.loads(schedule)
        except ValueError as exc:
            raise OptimizerError("Optimizer returned an unparsable optimizedSchedule") from exc
    
    if isinstance(schedule, dict):
        jobs = schedule.get("jobs")
    else:
        jobs = schedule
    
    if not isinstance(jobs, list):
        raise OptimizerError("Optimizer response does not contain a job list")
    
    return OptimizerResponse(jobs=jobs, explanation=str(parsed.get("explanation") or ""))


def optimize_schedule(
    schedule_data: Dict[str, Any],
    constraints: str,
    base_url: str = "http://localhost:11434",
    model: str = "mistral",
    timeout: float = 60,
) -> OptimizerResponse:
    """
    Ask the optimizer for a new schedule.
    
    Args:
        schedule_data: Payload built by to_optimizer_input()
        constraints: Free-text constraints and objectives
        base_url: Optimizer base URL
        model: Model name
        timeout: Request timeout in seconds
        
    Returns:
        OptimizerResponse
        
    Raises:
        OptimizerError: On network/service errors or malformed responses
    """
    prompt = build_prompt(schedule_data, constraints)
    url = f"{base_url.rstrip('/')}/api/generate"
    
    try:
        res = requests.post(
            url,
            json={"model": model, "prompt": prompt, "stream": False, "format": "json"},
            timeout=timeout,
        )
        res.raise_for_status()
    except requests.RequestException as exc:
        logger.error("Optimizer request failed", url=url, error=str(exc))
        raise OptimizerError(f"Optimizer request failed: {exc}") from exc
    
    try:
        parsed = json.loads(res.json()["response"])
    except (ValueError, KeyError, TypeError) as exc:
        logger.error("Optimizer returned an unparsable response", url=url, error=str(exc))
        raise OptimizerError("Optimizer returned an unparsable response") from exc
    
    return parse_optimizer_output(parsed)
