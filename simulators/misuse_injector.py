import random
from typing import List, Optional
from simulators.operation_stream_sim import OperationRequest

def inject_repeat(requests: List[OperationRequest], rate=0.1, rng: Optional[random.Random] = None):
    rng = rng or random.Random()
    repeated = []
    for r in requests:
        repeated.append(r)
        if rng.random() < rate:
            repeated.append(r)  # same operation twice in a row
    return repeated

def inject_skip(requests: List[OperationRequest], rate=0.1, rng: Optional[random.Random] = None):
    rng = rng or random.Random()
    # dropping a request makes the next one for that toaster skip a step
    return [r for r in requests if rng.random() >= rate]

def inject_shuffle(requests: List[OperationRequest], rng: Optional[random.Random] = None):
    rng = rng or random.Random()
    shuffled = list(requests)
    rng.shuffle(shuffled)
    return shuffled
