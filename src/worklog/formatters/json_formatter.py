"""JSON rendering of a WorkSummary."""

import json
from typing import Any

from ..models import SmartSummary, WorkSummary


def smart_summary_to_dict(smart: SmartSummary) -> dict[str, Any]:
    return {
        "narrative": smart.narrative,
        "clusters": [
            {
                "id": c.id,
                "theme": c.theme,
                "keywords": c.keywords,
                "coherenceScore": round(c.coherence_score, 3),
                "items": [item.title for item in c.items],
            }
            for c in smart.clusters
        ],
        "crossClusterConnections": [
            {"from": conn.from_id, "to": conn.to_id, "relationship": conn.relationship}
            for conn in smart.cross_cluster_connections
        ],
    }


def format_json(summary: WorkSummary) -> str:
    output = {
        "dateRange": {
            "start": summary.date_range.start.isoformat(),
            "end": summary.date_range.end.isoformat(),
        },
        "generatedAt": summary.generated_at.isoformat(),
        "sources": summary.sources,
        "itemCount": len(summary.items),
        "llmSummary": summary.llm_summary,
        "smartSummary": smart_summary_to_dict(summary.smart_summary) if summary.smart_summary else None,
        "items": [
            {
                "source": item.source,
                "timestamp": item.timestamp.isoformat(),
                "title": item.title,
                "description": item.description,
                "metadata": item.metadata,
            }
            for item in summary.items
        ],
    }
    return json.dumps(output, indent=2, ensure_ascii=False, default=str)
