"""
constants.py
- Project-wide constants shared across the scorer, backends and runner.
- Includes operator spellings, orchestration label keys and task states.
"""

# --- Match Expression Operators ---
OP_IN = "In"
OP_NOT_IN = "NotIn"
OP_EXISTS = "Exists"
OP_DOES_NOT_EXIST = "DoesNotExist"
OP_GT = "Gt"
OP_LT = "Lt"

# Long-form aliases accepted in rule documents
OPERATOR_ALIASES = {
    "GreaterThan": OP_GT,
    "LessThan": OP_LT,
}

# --- Tolerance ---
DEFAULT_TOLERANCE = 0  # score margin a candidate must exceed

# --- Swarm Labels ---
PREFERENCE_LABEL = "orchestration.affinity.preferred"
REBALANCE_OPT_OUT_LABEL = "orchestration.rebalance"
STACK_NAMESPACE_LABEL = "com.docker.stack.namespace"

# Swarm task states that will never run again
TERMINAL_TASK_STATES = {"complete", "shutdown", "failed", "rejected", "remove", "orphaned"}

# --- Kubernetes ---
TERMINAL_POD_PHASES = ("Succeeded", "Failed")
