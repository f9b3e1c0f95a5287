"""Benchmark piecetok encoding against huggingface's WordPiece model.

Runs a fixed list of German sentences (or a slice of a Hugging Face dataset)
through both tokenizers and prints a markdown table row per tokenizer:
  Tokenizer | Texts | Tokens | Time | Throughput
"""

import argparse
import time

from datasets import load_dataset
from tokenizers import Tokenizer

from piecetok import WordPieceTokenizer
from piecetok.huggingface import HuggingFaceModel

TEXT_LIST = [
    "Ich esse Steak.",
    "Der Hund spielt im Garten.",
    "Ein Junge im Kindergarten spielt mit dem Ball.",
    "Wie definiert die Bundesregierung Clans und Clankriminalität?",
    "Welche Vereinbarungen auf Landesebene bestehen mit Drittstaaten?",
    "Wie viele Menschen starben durch die Folgen der Borreliose-Erkrankung?",
    "Welche Abkommen mit auswärtigen Staaten bestehen seitens welcher Länder aktuell?",
    "Gibt es genügend Impfstoff gegen FSME angesichts der steigenden Infektionszahlen?",
    "Gibt es genügend Impfstoff gegen Corona angesichts der steigenden Infektionszahlen?",
    "Steht vor dem Hintergrund der gestiegenen Infektionen ausreichend Impfstoff gegen FSME zur Verfügung?",
    "Liegen der Bundesregierung statistische Daten zu Todesfällen in Folge von Borreliose vor und wenn ja, wie lauten diese?",
]


def load_corpus(dataset: str | None, num_docs: int | None) -> list[str]:
    """Return the built-in sentences, or up to `num_docs` documents of `dataset`."""
    if dataset is None:
        return TEXT_LIST
    print(f"Loading {dataset} (non-streaming) …")
    ds = load_dataset(dataset, split="train")
    if num_docs is not None:
        return ds[:num_docs]["text"]
    return ds["text"]


def time_piecetok(tok: WordPieceTokenizer, texts: list[str], repeat: int) -> tuple[float, int]:
    """Return (best seconds, token count) over `repeat` runs."""
    best = float("inf")
    n_tokens = 0
    for _ in range(repeat):
        t0 = time.perf_counter()
        n_tokens = sum(len(tok.encode(text).ids) for text in texts)
        best = min(best, time.perf_counter() - t0)
    return best, n_tokens


def time_huggingface(hf: Tokenizer, texts: list[str], repeat: int) -> tuple[float, int]:
    """Return (best seconds, token count) over `repeat` runs."""
    best = float("inf")
    n_tokens = 0
    for _ in range(repeat):
        t0 = time.perf_counter()
        n_tokens = sum(len(hf.encode(text).ids) for text in texts)
        best = min(best, time.perf_counter() - t0)
    return best, n_tokens


def main() -> None:
    """Run the benchmark and print one table row per tokenizer."""
    parser = argparse.ArgumentParser(
        description="Benchmark piecetok against huggingface WordPiece."
    )
    parser.add_argument("--vocab", required=True, help="Path to a BERT-style vocab.txt.")
    parser.add_argument(
        "--pattern",
        choices=["whitespace", "bert"],
        default="whitespace",
        help="Word split pattern (default: whitespace).",
    )
    parser.add_argument(
        "--dataset",
        type=str,
        default=None,
        help="Optional Hugging Face dataset with a 'text' column; default uses built-in sentences.",
    )
    parser.add_argument(
        "--num-docs",
        type=int,
        default=None,
        help="Number of dataset documents to encode (default: all).",
    )
    parser.add_argument(
        "--repeat",
        type=int,
        default=10,
        help="Runs per tokenizer; the fastest is reported (default: 10).",
    )
    args = parser.parse_args()

    texts = load_corpus(args.dataset, args.num_docs)
    if not texts:
        raise RuntimeError("No texts to encode.")
    total_mb = sum(len(t.encode("utf-8")) for t in texts) / (1024 * 1024)

    tok = WordPieceTokenizer.from_vocab(args.vocab, args.pattern)
    hf = HuggingFaceModel(tok).to_tokenizer()

    rows = [
        ("piecetok", *time_piecetok(tok, texts, args.repeat)),
        ("huggingface", *time_huggingface(hf, texts, args.repeat)),
    ]

    print()
    print(f"| {'Tokenizer':12} | {'Texts':8} | {'Tokens':10} | {'Time':12} | {'Throughput':14} |")
    print(f"| {'-' * 12} | {'-' * 8} | {'-' * 10} | {'-' * 12} | {'-' * 14} |")
    for name, secs, n_tokens in rows:
        print(
            f"| {name:12} | {len(texts):8,} | {n_tokens:10,} "
            f"| {f'{secs * 1000:.2f} ms':12} | {f'{total_mb / secs:.2f} MB/sec':14} |"
        )
    print()


if __name__ == "__main__":
    main()
