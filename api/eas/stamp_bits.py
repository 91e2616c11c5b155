"""
Maps every provider to a fixed position in the bitmap used by the on-chain
passport attestation. Position `n` is bit `n % 256` of the uint256 at index
`n // 256`.

STAMP_PROVIDERS is append-only: positions of existing providers never move
and are never reused, so bitmaps attested with an older version of the list
decode the same way with a newer one. Bump PROVIDER_MAP_VERSION whenever
providers are appended.
"""

from typing import Dict, Iterable, List

from pydantic import BaseModel

PROVIDER_MAP_VERSION = 1

BITS_PER_INDEX = 256


class StampBit(BaseModel):
    bit: int
    index: int
    name: str


STAMP_PROVIDERS = (
    "Signer",
    "Google",
    "Ens",
    "Poh",
    "POAP",
    "Facebook",
    "FacebookProfilePicture",
    "Brightid",
    "Github",
    "TenOrMoreGithubFollowers",
    "FiftyOrMoreGithubFollowers",
    "ForkedGithubRepoProvider",
    "StarredGithubRepoProvider",
    "FiveOrMoreGithubRepos",
    "githubContributionActivityGte#30",
    "githubContributionActivityGte#60",
    "githubContributionActivityGte#120",
    "githubAccountCreationGte#90",
    "githubAccountCreationGte#180",
    "githubAccountCreationGte#365",
    "GitcoinContributorStatistics#numGrantsContributeToGte#1",
    "GitcoinContributorStatistics#numGrantsContributeToGte#10",
    "GitcoinContributorStatistics#numGrantsContributeToGte#25",
    "GitcoinContributorStatistics#numGrantsContributeToGte#100",
    "GitcoinContributorStatistics#totalContributionAmountGte#10",
    "GitcoinContributorStatistics#totalContributionAmountGte#100",
    "GitcoinContributorStatistics#totalContributionAmountGte#1000",
    "GitcoinContributorStatistics#numRoundsContributedToGte#1",
    "GitcoinContributorStatistics#numGr14ContributionsGte#1",
    "GitcoinGranteeStatistics#numOwnedGrants#1",
    "GitcoinGranteeStatistics#numGrantContributors#10",
    "GitcoinGranteeStatistics#numGrantContributors#25",
    "GitcoinGranteeStatistics#numGrantContributors#100",
    "GitcoinGranteeStatistics#totalContributionAmount#100",
    "GitcoinGranteeStatistics#totalContributionAmount#1000",
    "GitcoinGranteeStatistics#totalContributionAmount#10000",
    "GitcoinGranteeStatistics#numGrantsInEcoAndCauseRound#1",
    "Linkedin",
    "Discord",
    "GitPOAP",
    "Snapshot",
    "SnapshotProposalsProvider",
    "SnapshotVotesProvider",
    "ethPossessionsGte#1",
    "ethPossessionsGte#10",
    "ethPossessionsGte#32",
    "FirstEthTxnProvider",
    "EthGTEOneTxnProvider",
    "EthGasProvider",
    "SelfStakingBronze",
    "SelfStakingSilver",
    "SelfStakingGold",
    "CommunityStakingBronze",
    "CommunityStakingSilver",
    "CommunityStakingGold",
    "NFT",
    "ZkSync",
    "ZkSyncEra",
    "Lens",
    "GnosisSafe",
    "Coinbase",
    "GuildMember",
    "GuildAdmin",
    "GuildPassportMember",
    "Hypercerts",
    "CyberProfilePremium",
    "CyberProfilePaid",
    "CyberProfileOrgMember",
    "PHIActivitySilver",
    "PHIActivityGold",
    "HolonymGovIdProvider",
    "IdenaState#Newbie",
    "IdenaState#Verified",
    "IdenaState#Human",
    "IdenaStake#1k",
    "IdenaStake#10k",
    "IdenaStake#100k",
    "IdenaAge#5",
    "IdenaAge#10",
    "CivicCaptchaPass",
    "CivicUniquenessPass",
    "CivicLivenessPass",
    "Twitter",
    "TwitterTweetGT10",
    "TwitterFollowerGT100",
    "TwitterFollowerGT500",
    "TwitterFollowerGTE1000",
    "TwitterFollowerGT5000",
    "twitterAccountAgeGte#180",
    "twitterAccountAgeGte#365",
    "twitterAccountAgeGte#730",
    "twitterTweetDaysGte#30",
    "twitterTweetDaysGte#60",
    "twitterTweetDaysGte#120",
)

STAMP_BITS: List[StampBit] = [
    StampBit(bit=position % BITS_PER_INDEX, index=position // BITS_PER_INDEX, name=name)
    for position, name in enumerate(STAMP_PROVIDERS)
]

# Quick lookup map
STAMP_BITS_BY_NAME: Dict[str, StampBit] = {
    stamp_bit.name: stamp_bit for stamp_bit in STAMP_BITS
}


def has_stamp_bit(provider: str) -> bool:
    return provider in STAMP_BITS_BY_NAME


def get_stamp_bit(provider: str) -> StampBit:
    return STAMP_BITS_BY_NAME[provider]


def encode_providers(providers: Iterable[str]) -> List[int]:
    """
    Return the bitmap for `providers` as a list of uint256 values, one per
    index. Raises KeyError for a provider without a bit.
    """
    bitmap: List[int] = []
    for provider in providers:
        stamp_bit = get_stamp_bit(provider)
        while len(bitmap) <= stamp_bit.index:
            bitmap.append(0)
        bitmap[stamp_bit.index] |= 1 << stamp_bit.bit
    return bitmap


def decode_providers(bitmap: List[int]) -> List[str]:
    return [
        stamp_bit.name
        for stamp_bit in STAMP_BITS
        if stamp_bit.index < len(bitmap)
        and bitmap[stamp_bit.index] & (1 << stamp_bit.bit)
    ]
