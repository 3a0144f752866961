import asyncio
import datetime
import logging

from py_docmodel.config import StoreConfig
from py_docmodel.document.client import Client


client = Client()

client.model("users", {
    "name": str,
    "age": int,
    "roles": [str],
})

client.model("files", {
    "_exclusive": True,
    "filename": str,
    "size": int,
    "uploaded_at": datetime.datetime,
    "meta": {"public": bool, "tags": [str]},
})


async def main():
    db = await client.connect(StoreConfig.from_env(default_data_dir="./db"))
    users = db.col("users")
    files = db.col("files")

    bob = await users.insert({"name": "Bob", "age": 30, "roles": ["member"]})

    await files.insert(files({
        "filename": "resume.pdf",
        "size": 12345,
        "uploaded_at": datetime.datetime.now(),
        "meta": {"public": False, "tags": [bob["_id"]]},
    }))

    print(await users.find({"age": {"$gte": 18}}))
    db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
