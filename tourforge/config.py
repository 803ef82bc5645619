"""
Default tuning parameters.

Every value here can be overridden through the keyword arguments of the
component that uses it.
"""

# moves with a weight delta above this are not considered improvements
EPSILON = 1e-9

# nearest neighbour cache
NN_COUNT = 10

# edge assembly crossover
EAX_MAX_OFFSPRING = 30
EAX_NN_MERGE = 10
EAX_MULTIPLE_RANDOM_KEEP = 0.75

# hill climbing 3-opt
HILL_CLIMBING_MAX_ITERATIONS = 1000
HILL_CLIMBING_MAX_SEGMENT = 3

# variable neighbourhood search
VNS_MAX_ITERATIONS = 10
VNS_LEVEL_MAX = 1000
LOCAL_SEARCH_MAX_ITERATIONS = 1000

# genetic solver
GA_POPULATION_SIZE = 30
GA_GENERATIONS = 300
GA_TOURNAMENT_SIZE = 5

# seeded cheapest insertion
SCI_IMPROVEMENTS_THRESHOLD = 0.25
SCI_SEED_NEIGHBOURS = 20
SCI_SEED_SAMPLE_RATIO = 0.75
SCI_SEED_NEIGHBOUR_RATIO = 0.5
SEEDED_TOUR_SIZE = 10
CVRP_CONSTRUCTION_ITERATIONS = 20
