"""
Download batch job results
"""
import asyncio
from adsbatch import AdsUser, BatchJobUtilities


DOWNLOAD_URL = "https://storage.googleapis.com/batchjob-results/result.xml"


async def main():
    async with AdsUser() as user:
        async with BatchJobUtilities(user) as utilities:
            response = await utilities.download(DOWNLOAD_URL)
        
        print(f"{len(response.succeeded)} succeeded, {len(response.failed)} failed")
        
        for result in response.succeeded:
            print(f"  [{result.index}] {result.result}")
        
        for index, error in response.errors:
            print(f"  [{index}] {error.error_string} ({error.field_path})")


if __name__ == "__main__":
    asyncio.run(main())
