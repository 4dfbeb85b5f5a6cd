"""Configuration settings for the Redis PodDisruptionBudget reconciler."""

# CRD Settings
CRD_GROUP = "redis.redis.opstreelabs.in"
CRD_VERSION = "v1beta1"
CRD_PLURAL = "redisclusters"
CRD_KIND = "RedisCluster"

# PodDisruptionBudget object settings
PDB_API_VERSION = "policy/v1"
PDB_KIND = "PodDisruptionBudget"

# Cluster roles that each get their own PodDisruptionBudget
ROLE_LEADER = "leader"
ROLE_FOLLOWER = "follower"
ROLES = (ROLE_LEADER, ROLE_FOLLOWER)

# Controller annotations
MANAGED_BY_ANNOTATION = "pdb-reconciler.redis.io/managed-by"
MANAGED_BY_VALUE = "pdb-reconciler"
LAST_APPLIED_ANNOTATION = "pdb-reconciler.redis.io/last-applied"

# Redis setup type label value
SETUP_TYPE = "cluster"

# Used when the RedisCluster omits spec.clusterSize
DEFAULT_CLUSTER_SIZE = 3

# Watch settings
WATCH_TIMEOUT_SECONDS = 300
RECONCILE_INTERVAL_SECONDS = 30
WATCH_RETRY_SECONDS = 5
