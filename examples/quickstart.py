#!/usr/bin/env python3
"""Quick start example: 3-of-5 secret sharing in 50 lines.

Demonstrates the core workflow:
  1. Split a secret into five share sets
  2. Reconstruct it from any three
  3. Collect shares progressively, one participant at a time
  4. Check that redundancy verification catches a corrupted share
"""

from shamir256.models import Share
from shamir256.reconstruction import ProgressiveReconstructor, reconstruct_with_verification
from shamir256.secure_random import SecureRandom
from shamir256.shamir import ShamirSecretSharing, reconstruct, split
from shamir256.simulation import CorruptionSimulator
from shamir256.stats import assess_random_source

# --- 1. Split ---
secret = b"correct horse battery staple"
share_sets = split(secret, threshold=3, total_shares=5)
print(f"Split {len(secret)} bytes into {len(share_sets)} share sets (threshold 3)")
for share_set in share_sets:
    print(f"  #{share_set.metadata.share_index}: x={share_set.x}")

# --- 2. Reconstruct from any three ---
recovered = reconstruct([share_sets[4], share_sets[1], share_sets[2]])
print(f"\nRecovered: {recovered!r}  (match: {recovered == secret})")

# --- 3. Progressive collection of a single byte ---
sss = ShamirSecretSharing()
shares = sss.share_byte(200, threshold=3, total_shares=5)
progressive = ProgressiveReconstructor(threshold=3)
for share in shares[:3]:
    progressive.add_share(share)
    print(f"  progress={progressive.progress:.2f} complete={progressive.is_complete}")
print(f"Progressive result: {progressive.secret}")

# --- 4. Corruption detection ---
shares[4] = Share(x=shares[4].x, y=shares[4].y ^ 0x01)
result = reconstruct_with_verification(shares, threshold=3)
print(f"\nVerification with one corrupted share: success={result.success} ({result.error})")

sim = CorruptionSimulator(threshold=3, total_shares=5, seed=42)
sim_result = sim.run(n_corrupted=1, n_trials=1_000)
print(f"  detection rate over 1k trials: {sim_result.detection_rate:.3f}")

report = assess_random_source(SecureRandom.default(), n_samples=20_000, categories=6)
print(f"\nnext_int(6) chi-square p={report.p_value:.3f} passed={report.passed}")
