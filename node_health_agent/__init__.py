"""
Node Health Agent: HAProxy health sidecar for blockchain nodes.

Samples a liveness signal from the monitored node (chain height against
reference nodes, or a metric exposed by the node) and reports the derived
health and weight to load-balancer probes. Modular layout: health sources,
shared state and sampler, probe servers (TCP agent-check and HTTP).
"""

__version__ = "0.1.0"
