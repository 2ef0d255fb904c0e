"""
Trace event names emitted by GraphEvaluator. Events are plain dicts carrying
``type``, ``runId`` and a millisecond ``ts``, plus:

    EXEC_START    startNodeIds
    NODE_RUNNING  nodeId
    NODE_DONE     nodeId, durationMs
    NODE_ERROR    nodeId, error
    EDGE_ACTIVE   fromNodeId, fromPort, toNodeId, toPort
    EXEC_DONE     -
    EXEC_ERROR    error
"""

TRACE_EVENT_TYPES = (
    "EXEC_START",
    "NODE_RUNNING",
    "NODE_DONE",
    "NODE_ERROR",
    "EDGE_ACTIVE",
    "EXEC_DONE",
    "EXEC_ERROR",
)
