import argparse
import logging
import sys
import uuid

import dotenv
dotenv.load_dotenv()


def _print_video(v) -> None:
    print(f"{v.video_id}  {v.indexing_status.value:<8}  {v.url}")


def main():
    parser = argparse.ArgumentParser(prog="learnvid")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log every API call")
    sub = parser.add_subparsers(dest="command")

    p_serve = sub.add_parser("serve")
    p_serve.add_argument("--host", default="0.0.0.0")
    p_serve.add_argument("--port", type=int, default=8000)

    sub.add_parser("videos", help="List uploaded videos")

    p_upload = sub.add_parser("upload", help="Upload a video by URL and index it")
    p_upload.add_argument("url", type=str)
    p_upload.add_argument("name", type=str)

    p_delete = sub.add_parser("delete", help="Delete videos by ID")
    p_delete.add_argument("video_ids", nargs="+", type=uuid.UUID)

    p_search = sub.add_parser("search", help="Search across indexed videos")
    p_search.add_argument("query", type=str)

    p_ask = sub.add_parser("ask", help="Ask a question about one video")
    p_ask.add_argument("video_id", type=uuid.UUID)
    p_ask.add_argument("question", type=str)

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    from learnvid import runtime
    runtime.require(needs_api_key=True)

    if args.command == "serve":
        import uvicorn
        from learnvid import server
        app = server.create_app()
        uvicorn.run(app, host=args.host, port=args.port)
        return

    from learnvid import vision
    from learnvid.errors import VisionError

    try:
        with vision.VisionService(dump_dir=runtime.DUMP_DIR) as service:
            if args.command == "videos":
                videos = service.list_videos()
                for v in videos:
                    _print_video(v)
                print(f"{len(videos)} videos")

            elif args.command == "upload":
                _print_video(service.upload_video(args.url, args.name))

            elif args.command == "delete":
                service.delete_videos(args.video_ids)
                print(f"Deleted {len(args.video_ids)} videos")

            elif args.command == "search":
                results = service.search(args.query)
                if not results:
                    print("No results.")
                for r in results:
                    print(f"[{r.start_timestamp:.1f}-{r.end_timestamp:.1f}] {r.video_id} score={r.score:.3f}")
                    if r.caption:
                        print(f"  {r.caption}")

            elif args.command == "ask":
                answer = service.ask_question(args.video_id, args.question)
                print(answer.answer)
    except VisionError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
