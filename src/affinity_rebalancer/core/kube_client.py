"""
kube_client.py
- Builds a CoreV1Api for the Kubernetes backend.
- Loads the kubeconfig (explicit path/context or the default location) and
  falls back to the in-cluster service account config.
"""

from kubernetes import client, config
from loguru import logger

from affinity_rebalancer.core.errors import ClusterError


def load_core_api(kubeconfig=None, context=None):
    """
    Return a CoreV1Api bound to the configured cluster.

    Args:
        kubeconfig (str): Optional explicit path to a kubeconfig file.
        context (str): Optional named context inside the kubeconfig.

    Raises:
        ClusterError: if neither kubeconfig nor in-cluster config is usable.
    """
    try:
        config.load_kube_config(config_file=kubeconfig, context=context)
        logger.debug(f"[kubernetes] Loaded kubeconfig {kubeconfig or '(default)'} context={context or '(current)'}")
    except config.config_exception.ConfigException as e:
        logger.debug(f"[kubernetes] kubeconfig unavailable ({e}), trying in-cluster config")
        try:
            config.load_incluster_config()
        except config.config_exception.ConfigException as incluster_error:
            raise ClusterError(f"Couldn't get Kubernetes default config: {incluster_error}") from incluster_error
    return client.CoreV1Api()
