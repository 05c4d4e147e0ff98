"""Train a trigram chain on a Hugging Face text dataset and save it."""

import argparse
import logging
import time

from datasets import load_dataset

from trichain import TripletChain, get_tokenizer, list_patterns

# Configure logging to show INFO level and above.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%H:%M:%S",
)

HF_DATASET = "stevez80/Sci-Fi-Books-gutenberg"


def load_corpus(name: str, column: str, num_docs: int | None) -> list[str]:
    """Load up to `num_docs` documents via dataset indexing; full dataset when None."""
    print(f"Loading {name} (non-streaming) …")
    ds = load_dataset(name, split="train")
    if num_docs is not None:
        return ds[:num_docs][column]
    return ds[column]


def main() -> None:
    """Train on the dataset, print a few sentences and save the model."""
    parser = argparse.ArgumentParser(description="Train a TriChain model on a dataset.")
    parser.add_argument("--dataset", default=HF_DATASET, help="Hugging Face dataset name.")
    parser.add_argument("--column", default="text", help="Text column (default: text).")
    parser.add_argument(
        "--num-docs",
        type=int,
        default=1000,
        help="Number of documents to learn (default: 1000).",
    )
    parser.add_argument(
        "--pattern",
        choices=list_patterns(),
        default="words",
        help="Split pattern (default: words).",
    )
    parser.add_argument(
        "--model", default="sci-fi", help="Output path prefix (default: sci-fi)."
    )
    parser.add_argument("-n", type=int, default=5, help="Sentences to print.")
    args = parser.parse_args()

    docs = load_corpus(args.dataset, args.column, args.num_docs)
    if not docs:
        raise RuntimeError("No documents loaded from dataset.")
    print(f"number of docs {len(docs)}")

    chain = TripletChain(get_tokenizer("regex", pattern=args.pattern))
    start = time.perf_counter()
    learned = sum(chain.learn(doc) for doc in docs)
    elapsed = time.perf_counter() - start
    print(f"learned {learned:,} lines, {len(chain):,} triplets in {elapsed:.2f}s")

    for sentence in chain.generate(args.n):
        print(f"  {sentence}")

    chain.save(args.model)


if __name__ == "__main__":
    main()
